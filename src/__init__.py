"""
credaccess - Gestion des utilisateurs et de leurs credentials d'accès.

Ce package fournit une application console de création, consultation,
modification, suppression logique et restauration d'utilisateurs, chacun
possédant exactement une credential (secret haché et salé).

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, exceptions)
- services/ : Couche application (cas d'utilisation transactionnels)
- infrastructure/ : Persistance (SQLModel, transactions, hachage)
- adapters/ : Interface ligne de commande (Typer + Rich)
"""
