from sqlmodel import SQLModel
from chthon.db.session import engine
from chthon.core.config import settings
from chthon.models import (  # noqa: F401
    user,
    refresh_token,
    chat_session,
    chat_message,
    analytics_record,
)


def init_db(drop_all: bool = False) -> None:
    if drop_all:
        SQLModel.metadata.drop_all(engine)
    if (
        settings.DATABASE_URL.startswith('sqlite')
        or settings.ENV != 'production'
        or settings.AUTO_CREATE_TABLES
    ):
        SQLModel.metadata.create_all(engine)
