"""
Couche infrastructure de credaccess.

Ce module contient les implémentations concrètes des interfaces définies
dans la couche domaine (ports). Il gère les préoccupations techniques :

- persistence/ : Stockage SQL avec SQLModel (modèles, transactions, repositories)

Architecture hexagonale : les adapters ici implémentent les ports du domaine,
permettant de changer l'implémentation (ex: MySQL au lieu de SQLite)
sans modifier la logique métier.
"""
