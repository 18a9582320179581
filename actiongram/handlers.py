"""Handlers of the bundled example bot.

Each function describes its reply as an action and performs no I/O; the
session in :mod:`actiongram.main` interprets what they return.
"""

from actiongram.bot.actions import (
    Action,
    AnswerCallbackQuery,
    AnswerInlineQuery,
    ChatMessage,
    EditMessageText,
    KickChatMember,
    Nothing,
    chain,
    send_message,
)
from actiongram.bot.auth import with_auth
from actiongram.bot.dispatcher import Handlers
from actiongram.bot.registry import Command, tokenize
from actiongram.core.logger import ActiongramLogger
from actiongram.core.result import Result
from actiongram.sdk.models import (
    CallbackQuery,
    Chat,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    InlineQuery,
    InlineQueryResultArticle,
    InputTextMessageContent,
    Message,
    User,
)

logger = ActiongramLogger.get_logger()


# ── Commands ─────────────────────────────────────────────────────────────────


def say_hi(message: Message) -> Action:
    """Handle /say_hi — greet the sender, then edit the greeting in place."""
    name = message.from_field.first_name if message.from_field else "there"

    def edit(result: Result[Message]) -> Action:
        if not result.is_success:
            return Nothing()
        sent = result.value
        return EditMessageText(
            target=ChatMessage(sent.chat.id, sent.message_id),
            text=f"Hi, {name}! 👋",
        )

    return send_message(message.chat.id, "Hi, %s!", name, and_then=edit)


def kick(message: Message) -> Action:
    """Handle /kick <user_id> — remove a user from the chat.  Admins only."""
    args = tokenize(message.text or "")
    if not args:
        return send_message(message.chat.id, "Usage: /kick <user_id>")
    try:
        target_id = int(args[0])
    except ValueError:
        return send_message(message.chat.id, "❌ Invalid user_id. It must be an integer.")
    logger.info("Kicking user", extra={"chat_id": message.chat.id, "target_user_id": target_id, "command": "kick"})
    return chain(
        KickChatMember(chat_id=message.chat.id, user_id=target_id),
        send_message(message.chat.id, "User %d was removed.", target_id),
    )


def poll(message: Message) -> Action:
    """Handle /poll — offer a yes/no question as inline buttons."""
    markup = InlineKeyboardMarkup(
        inline_keyboard=[[
            InlineKeyboardButton(text="👍 Yes", callback_data="vote:yes"),
            InlineKeyboardButton(text="👎 No", callback_data="vote:no"),
        ]]
    )
    question = " ".join(tokenize(message.text or "")) or "Do you agree?"
    return send_message(message.chat.id, question, reply_markup=markup)


COMMANDS = [
    Command(name="say_hi", description="Say hi", run=say_hi),
    Command(name="kick", description="Kick a user from the chat (admins only)", run=with_auth(kick)),
    Command(name="poll", description="Ask a yes/no question", run=poll),
]


# ── Inline queries and callbacks ─────────────────────────────────────────────


def echo_inline(query: InlineQuery) -> Action:
    """Offer the typed query back as a single article."""
    if not query.query:
        return Nothing()
    article = InlineQueryResultArticle(
        id=query.id,
        title=query.query,
        input_message_content=InputTextMessageContent(message_text=query.query),
    )
    return AnswerInlineQuery(inline_query_id=query.id, results=[article], cache_time=0)


def answer_vote(callback: CallbackQuery) -> Action:
    """Acknowledge a vote button press."""
    choice = (callback.data or "").partition(":")[2] or "nothing"
    return AnswerCallbackQuery(callback_query_id=callback.id, text=f"You voted {choice}")


# ── Chat events ──────────────────────────────────────────────────────────────


def welcome(chat: Chat, user: User) -> Action:
    return send_message(chat.id, "Welcome, %s!", user.first_name)


def farewell(chat: Chat, user: User) -> Action:
    return send_message(chat.id, "Goodbye, %s.", user.first_name, disable_notification=True)


def build_handlers() -> Handlers:
    """Assemble the example bot's handler set."""
    return Handlers(
        commands=list(COMMANDS),
        inline=echo_inline,
        callback=answer_vote,
        new_chat_member=welcome,
        left_chat_member=farewell,
    )
