"""
Couche domaine (core).

Contient les entités métier, les ports (interfaces abstraites) et la
taxonomie des erreurs. Cette couche n'a AUCUNE dépendance vers
l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités métier (User, Credential)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
- exceptions.py : Erreurs métier partagées par toutes les couches
"""
