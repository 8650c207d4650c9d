"""In-memory SQLite store and row builders shared by the service and API tests."""

from datetime import UTC, datetime

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Category, Conversation, Message, Product, Server, User


def make_engine() -> Engine:
    """Fresh in-memory database with every table created; one shared connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    username: str,
    role: str = "user",
    created_at: datetime | None = None,
    is_banned: bool = False,
    ban_reason: str | None = None,
    **kwargs: object,
) -> User:
    defaults = {
        "first_name": username.capitalize(),
        "last_name": "Tester",
        "email": f"{username}@example.com",
        "password_hash": "not-a-real-hash",
    }
    defaults.update(kwargs)
    user = User(
        username=username,
        role=role,
        is_banned=is_banned,
        ban_reason=ban_reason,
        created_at=created_at or datetime.now(UTC),
        **defaults,
    )
    db.add(user)
    db.flush()
    return user


def add_lookups(db: Session, category_name: str = "cars", server_name: str = "arbat") -> tuple[Category, Server]:
    category = Category(name=category_name, display_name=category_name.title(), icon="fas fa-car", color="blue")
    server = Server(name=server_name, display_name=server_name.title())
    db.add_all([category, server])
    db.flush()
    return category, server


def add_product(
    db: Session,
    owner: User,
    category: Category,
    server: Server,
    title: str = "Listing",
    status: str = "pending",
    created_at: datetime | None = None,
    price: int = 1000,
    **kwargs: object,
) -> Product:
    product = Product(
        title=title,
        description=f"{title} description",
        price=price,
        category_id=category.id,
        server_id=server.id,
        user_id=owner.id,
        status=status,
        created_at=created_at or datetime.now(UTC),
        **kwargs,
    )
    db.add(product)
    db.flush()
    return product


def add_conversation(db: Session, user1: User, user2: User, product: Product | None = None) -> Conversation:
    conversation = Conversation(
        user1_id=user1.id,
        user2_id=user2.id,
        product_id=product.id if product is not None else None,
    )
    db.add(conversation)
    db.flush()
    return conversation


def add_message(
    db: Session,
    sender: User | None,
    conversation_id: int | None,
    content: str = "hello",
    created_at: datetime | None = None,
    is_moderated: bool = False,
) -> Message:
    message = Message(
        sender_id=sender.id if sender is not None else None,
        conversation_id=conversation_id,
        content=content,
        is_moderated=is_moderated,
        created_at=created_at or datetime.now(UTC),
    )
    db.add(message)
    db.flush()
    return message
