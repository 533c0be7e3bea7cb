"""User-facing message templates."""
import random
from typing import Optional, Sequence

QUOTE_FAILED = "Oh no, I couldn't get a quote! :zipper_mouth_face:"
DESTINATION_FAILED = "Hmm, I couldn't figure out where {address} lives on the Interledger. :thinking_face:"
PAYMENT_FAILED = "Eek, I tried, I tried, but the payment just wouldn't go through! :cold_sweat:"
INFO_NOT_REGISTERED = "Sorry, you need to register first! Try `/payto help` to see how."
PROFILE_EMAIL_FAILED = "Error: could not get your email address from your Slack profile"
UNKNOWN_BALANCE = "unable to determine balance"
UNKNOWN_CURRENCY = "unable to determine currency"

HELP_TEXT = """*Payto* sends Interledger payments to your fellow Slackers :money_with_wings:

• `/payto @user amount [message]` pay someone who has an SPSP Address in their profile
• `/payto register https://kit.example/register/INVITE_CODE` create a new account on an ILP Kit with an invite link
• `/payto register alice@kit.example password` use an ILP Kit account you already have
• `/payto info` show your account, balance and currency
• `/payto help` show this message"""

PAYTO_QUOTES = (
    "We can easily forgive a banker who is afraid of Interledger; the real tragedy of life is when developers are afraid of the IoV.",
    "Interledger payments are their own reward.",
    "The first and best victory is to conquer SWIFT.",
    "The penalty good developers pay for indifference to payment efficiency is to be ruled by uncompetitive networks.",
    "Man is a being in search of the Internet of Value.",
    "The measure of a man is what he does with Interledger.",
    "The greatest wealth is to live streaming content with little Interledger payments.",
)


def payto_quote(quotes: Sequence[str] = PAYTO_QUOTES) -> str:
    return random.choice(quotes)


def signup_nudge(to_id: str, to_name: str, from_id: str, from_name: str,
                 team_name: str, team_domain: str) -> str:
    return f"""Citizen <@{to_id}|{to_name}>,

Your fellow citizen, <@{from_id}|{from_name}>, has attempted to send you money but you have failed to include your <https://{team_domain}.slack.com/team/{to_name}|SPSP Address in your Slack Profile>.

If you add your SPSP Address to your profile, other members of the Republic of {team_name} will be able to reward you for your courageous deeds by typing `/payto` in Slack! :money_with_wings:

You can also call upon my knowledge of the Interledger paths with `/payto register`.


> _{payto_quote()}_
> - Payto"""


def payment_ack(amount: str, recipient_name: str) -> str:
    return f"Paying {amount} to @{recipient_name}..."


def payment_confirmation(sender_id: str, recipient_id: str, source_amount: str, destination_amount: str) -> str:
    return (f"<@{sender_id}> paid <@{recipient_id}> {destination_amount} "
            f"(source amount: {source_amount}) :money_with_wings:")


def payment_received(sender_id: str, destination_amount: str, message: Optional[str]) -> str:
    text = f"<@{sender_id}> just sent you {destination_amount} over Interledger :money_with_wings:"
    if message:
        text += f"\n> {message}"
    return text


def profile_reminder(address: str) -> str:
    return (f"Don't forget to put `{address}` in the SPSP Address field of your Slack profile "
            "so others can pay you!")


def account_info(address: str, balance: str, currency: str) -> str:
    return f"*Account:* {address}\n*Balance:* {balance}\n*Currency:* {currency}"
