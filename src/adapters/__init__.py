"""
Couche adaptateurs.

Sous-packages :
- cli/ : Interface ligne de commande (Typer + Rich)

Chaque adaptateur dépend de core/ et services/ mais core/ ne dépend jamais
des adaptateurs.
"""
