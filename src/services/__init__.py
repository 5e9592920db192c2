"""
Couche services applicatifs (cas d'utilisation).

Les services orchestrent la logique du domaine pour réaliser les cas
d'utilisation de l'application :

- CredentialService : règles métier des credentials, opérations autonomes
  et participantes
- UserService : orchestration Utilisateur + Credential dans une transaction
- transactional : portée transactionnelle avec rollback et enrichissement
  des erreurs

Les services dependent des ports (interfaces) de core/ et reçoivent leurs
collaborateurs par injection dans le constructeur.
"""
