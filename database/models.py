from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

from payto.utils.time import utc_now

Base = declarative_base()


class CredentialRecord(Base):
    __tablename__ = "credentials"

    slack_user_id = Column(String(32), primary_key=True)
    account_endpoint = Column(String(500), nullable=False)
    identifier = Column(String(255), nullable=False)
    secret = Column(String(255), nullable=False)  # stored as given
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
