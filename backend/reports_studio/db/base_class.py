from typing import Any

from sqlalchemy.orm import declarative_base, declared_attr


class CustomBase:
    # Generate __tablename__ automatically
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"


Base: Any = declarative_base(cls=CustomBase)
