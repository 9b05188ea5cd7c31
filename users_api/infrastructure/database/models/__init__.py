# users_api/infrastructure/database/models/__init__.py
# Importar os modelos registra as tabelas em BaseModel.metadata

from users_api.infrastructure.database.models.user_model import UserModel

__all__ = ["UserModel"]
