import uuid


def new_id() -> str:
    """Идентификатор документа, как выдаёт хранилище."""
    return uuid.uuid4().hex
