from akita_connect.db.base import Base
from akita_connect.db.session import engine
from akita_connect.db.models import NotificationPreference, PushSubscription, User  # noqa: F401

if __name__ == "__main__":
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created.")
