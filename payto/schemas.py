"""Pydantic models for request/response bodies.

Covers the inbound Slack slash command form, the JSON we answer Slack with,
and the ILP Kit REST payloads the payment client reads.
"""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional


class SlashCommandForm(BaseModel):
    token: str = ""
    user_id: str
    user_name: str = ""
    text: str = ""
    command: str = ""
    response_url: str = ""
    team_id: Optional[str] = None
    channel_id: Optional[str] = None

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class SlackResponse(BaseModel):
    response_type: Literal["ephemeral", "in_channel"] = "ephemeral"
    text: str


class IlpKitModel(BaseModel):
    # ILP Kit speaks camelCase and adds fields between versions; keep them all.
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Quote(IlpKitModel):
    id: str
    destination: Optional[str] = None
    source_amount: str = Field(alias="sourceAmount")
    destination_amount: str = Field(alias="destinationAmount")

    @field_validator("source_amount", "destination_amount", mode="before")
    @classmethod
    def amount_as_string(cls, v):
        return str(v)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class DestinationDetails(IlpKitModel):
    type: Optional[str] = None
    account_name: Optional[str] = Field(default=None, alias="accountName")
    currency_code: Optional[str] = Field(default=None, alias="currencyCode")
    currency_symbol: Optional[str] = Field(default=None, alias="currencySymbol")
    name: Optional[str] = None

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class IlpKitUser(IlpKitModel):
    username: Optional[str] = None
    balance: Optional[str] = None

    @field_validator("balance", mode="before")
    @classmethod
    def balance_as_string(cls, v):
        return None if v is None else str(v)


class IlpKitConfig(IlpKitModel):
    currency_code: Optional[str] = Field(default=None, alias="currencyCode")
    currency_symbol: Optional[str] = Field(default=None, alias="currencySymbol")
