from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase): # All tables inherit from this base
    pass
