"""Actions — bot operations described as data.

An :class:`Action` value says *what* the bot should do; nothing happens until
:meth:`actiongram.bot.session.Bot.interpret` walks it.  There are four shapes:

- :class:`Nothing`: the no-op that ends a chain of continuations;
- :class:`Chain`: run ``first``, discard its outcome, then run ``second``;
- fire-and-forget tags (``SendMessage``, ``KickChatMember`` …) carrying only
  call parameters;
- result-producing tags (``GetMe``, ``SendPhoto`` …) carrying an ``and_then``
  continuation that receives the call's typed :class:`Result` and returns the
  next action.

Example: send a photo, then resend it by the file id the upload returned::

    def resend(result):
        if not result.is_success:
            return Nothing()
        return ResendPhoto(chat_id=chat_id, photo=result.value)

    SendPhoto(chat_id=chat_id, photo="cat.jpg", and_then=resend)

Every tag is a frozen dataclass; building one performs no I/O and never calls
its continuation.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional, Sequence, Union

from actiongram.core.result import Failure, Result, Success
from actiongram.sdk.codec import decode, decode_list
from actiongram.sdk.exceptions import SchemaError
from actiongram.sdk.models import (
    ChatAction,
    ChatMember,
    File,
    InlineQueryResult,
    Message,
    ParseMode,
    ReplyMarkup,
    User,
    UserProfilePhotos,
)
from actiongram.sdk.multipart import DEFAULT_CONTENT_TYPE
from actiongram.sdk.outgoing import OutboundRequest, fields, json_request, multipart_request

if TYPE_CHECKING:
    from actiongram.sdk.client import ActiongramClient

ChatId = Union[int, str]
Continuation = Callable[[Result[Any]], "Action"]


# ── Base shapes ──────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True)
class Action:
    """Base class of every action tag."""


@dataclasses.dataclass(frozen=True, slots=True)
class Nothing(Action):
    """Do nothing.  Interpreting it performs no I/O."""


@dataclasses.dataclass(frozen=True, slots=True)
class Chain(Action):
    """Run *first*, discard its outcome, then run *second*."""

    first: Action
    second: Action


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ApiAction(Action):
    """A tag that maps onto exactly one Bot API call.

    Subclasses set :attr:`endpoint` and implement :meth:`payload`.
    Result-producing subclasses declare an ``and_then`` field and override
    :meth:`read` to turn the raw ``result`` JSON into a typed value.
    """

    endpoint: ClassVar[str] = ""

    def payload(self) -> dict[str, Any]:
        """Request fields: required first, then present optional ones."""
        return {}

    async def build_request(self) -> OutboundRequest:
        return json_request(self.endpoint, self.payload())

    def read(self, raw: Any) -> Result[Any]:
        """Convert the envelope's ``result`` into this call's typed outcome."""
        return Success(raw)

    @property
    def continuation(self) -> Optional[Continuation]:
        return getattr(self, "and_then", None)

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        """Run the call against *client* and return its typed outcome."""
        request = await self.build_request()
        result = await client.call(request)
        return result.bind(self.read)


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SessionAction(Action):
    """A tag served by the bot session itself (update retrieval)."""

    and_then: Continuation


# ── Edit targets ─────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True)
class ChatMessage:
    """A message identified by its chat and message id."""

    chat_id: ChatId
    message_id: int

    def fields(self) -> dict[str, Any]:
        return {"chat_id": self.chat_id, "message_id": self.message_id}


@dataclasses.dataclass(frozen=True, slots=True)
class InlineMessage:
    """A message sent via inline mode, identified by its inline message id."""

    inline_message_id: str

    def fields(self) -> dict[str, Any]:
        return {"inline_message_id": self.inline_message_id}


MessageTarget = Union[ChatMessage, InlineMessage]


# ── Helpers ──────────────────────────────────────────────────────────────────


def _sent_file_id(raw: Any, media: str) -> Result[str]:
    """Extract the file id of the *media* attachment from a sent message."""
    message = decode(Message, raw)
    attachment = getattr(message, media)
    if media == "photo":
        if not attachment:
            raise SchemaError("photo", "sent message carries no photo")
        return Success(attachment[-1].file_id)
    if attachment is None:
        raise SchemaError(media, f"sent message carries no {media}")
    return Success(attachment.file_id)


async def _upload(
    action: ApiAction,
    client: ActiongramClient,
    file_field: str,
    path: str,
    default_content_type: str,
) -> Result[Any]:
    """Perform a multipart upload of *path*; unreadable files become a :class:`Failure`."""
    payload = action.payload()
    payload.pop(file_field)
    try:
        request = await multipart_request(
            action.endpoint,
            payload,
            file_field,
            path,
            default_content_type=default_content_type,
        )
    except OSError as exc:
        return Failure(f"could not read '{path}': {exc}")
    result = await client.call(request)
    return result.bind(action.read)


# ── Account ──────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class GetMe(ApiAction):
    """Fetch the bot's own :class:`User` record."""

    endpoint: ClassVar[str] = "getMe"
    and_then: Continuation

    async def build_request(self) -> OutboundRequest:
        return json_request(self.endpoint)

    def read(self, raw: Any) -> Result[User]:
        return Success(decode(User, raw))


# ── Messages ─────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendMessage(ApiAction):
    """Send a text message.

    Fire-and-forget unless ``and_then`` is given, in which case it receives
    the sent :class:`Message` (e.g. to edit it later by its id).
    """

    endpoint: ClassVar[str] = "sendMessage"
    chat_id: ChatId
    text: str
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: Optional[bool] = None
    disable_notification: bool = False
    reply_to: Optional[int] = None
    reply_markup: Optional[ReplyMarkup] = None
    and_then: Optional[Continuation] = None

    def payload(self) -> dict[str, Any]:
        return fields(
            ("chat_id", self.chat_id),
            ("text", self.text),
            ("disable_notification", self.disable_notification),
            parse_mode=self.parse_mode,
            disable_web_page_preview=self.disable_web_page_preview,
            reply_to_message_id=self.reply_to,
            reply_markup=self.reply_markup,
        )

    def read(self, raw: Any) -> Result[Message]:
        if self.and_then is None:
            return Success(raw)
        return Success(decode(Message, raw))


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ForwardMessage(ApiAction):
    endpoint: ClassVar[str] = "forwardMessage"
    chat_id: ChatId
    from_chat_id: ChatId
    message_id: int
    disable_notification: bool = False

    def payload(self) -> dict[str, Any]:
        return fields(
            ("chat_id", self.chat_id),
            ("from_chat_id", self.from_chat_id),
            ("message_id", self.message_id),
            ("disable_notification", self.disable_notification),
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendChatAction(ApiAction):
    """Show a status such as "typing…" in the chat."""

    endpoint: ClassVar[str] = "sendChatAction"
    chat_id: ChatId
    action: ChatAction

    def payload(self) -> dict[str, Any]:
        return fields(("chat_id", self.chat_id), ("action", self.action))


# ── Media: shared fields, file-id resends and uploads ────────────────────────
#
# Each media kind comes in two tags.  ``Resend*`` takes a file id the server
# already knows and travels as JSON.  ``Send*`` takes a local path, uploads it
# as multipart/form-data and hands the new file id to ``and_then``.


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class _Media(ApiAction):
    chat_id: ChatId
    disable_notification: bool = False
    reply_to: Optional[int] = None
    reply_markup: Optional[ReplyMarkup] = None

    def _common(self, media_field: str, media: str, **optional: Any) -> dict[str, Any]:
        return fields(
            ("chat_id", self.chat_id),
            (media_field, media),
            ("disable_notification", self.disable_notification),
            **optional,
            reply_to_message_id=self.reply_to,
            reply_markup=self.reply_markup,
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ResendPhoto(_Media):
    endpoint: ClassVar[str] = "sendPhoto"
    photo: str
    caption: Optional[str] = None

    def payload(self) -> dict[str, Any]:
        return self._common("photo", self.photo, caption=self.caption)


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendPhoto(ResendPhoto):
    """Upload a photo from a local path; ``and_then`` receives the new file id."""

    and_then: Continuation

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        return await _upload(self, client, "photo", self.photo, DEFAULT_CONTENT_TYPE)

    def read(self, raw: Any) -> Result[str]:
        return _sent_file_id(raw, "photo")


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ResendAudio(_Media):
    endpoint: ClassVar[str] = "sendAudio"
    audio: str
    performer: str
    title: str
    duration: Optional[int] = None

    def payload(self) -> dict[str, Any]:
        return self._common(
            "audio",
            self.audio,
            duration=self.duration,
            performer=self.performer,
            title=self.title,
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendAudio(ResendAudio):
    and_then: Continuation

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        return await _upload(self, client, "audio", self.audio, "audio/mpeg")

    def read(self, raw: Any) -> Result[str]:
        return _sent_file_id(raw, "audio")


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ResendDocument(_Media):
    endpoint: ClassVar[str] = "sendDocument"
    document: str
    caption: Optional[str] = None

    def payload(self) -> dict[str, Any]:
        return self._common("document", self.document, caption=self.caption)


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendDocument(ResendDocument):
    and_then: Continuation

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        return await _upload(self, client, "document", self.document, DEFAULT_CONTENT_TYPE)

    def read(self, raw: Any) -> Result[str]:
        return _sent_file_id(raw, "document")


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ResendSticker(_Media):
    endpoint: ClassVar[str] = "sendSticker"
    sticker: str

    def payload(self) -> dict[str, Any]:
        return self._common("sticker", self.sticker)


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendSticker(ResendSticker):
    and_then: Continuation

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        return await _upload(self, client, "sticker", self.sticker, "image/webp")

    def read(self, raw: Any) -> Result[str]:
        return _sent_file_id(raw, "sticker")


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ResendVideo(_Media):
    endpoint: ClassVar[str] = "sendVideo"
    video: str
    duration: Optional[int] = None
    caption: Optional[str] = None

    def payload(self) -> dict[str, Any]:
        return self._common("video", self.video, duration=self.duration, caption=self.caption)


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendVideo(ResendVideo):
    and_then: Continuation

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        return await _upload(self, client, "video", self.video, "video/mp4")

    def read(self, raw: Any) -> Result[str]:
        return _sent_file_id(raw, "video")


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class ResendVoice(_Media):
    endpoint: ClassVar[str] = "sendVoice"
    voice: str
    duration: Optional[int] = None

    def payload(self) -> dict[str, Any]:
        return self._common("voice", self.voice, duration=self.duration)


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendVoice(ResendVoice):
    and_then: Continuation

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        return await _upload(self, client, "voice", self.voice, "audio/ogg")

    def read(self, raw: Any) -> Result[str]:
        return _sent_file_id(raw, "voice")


# ── Places and contacts ──────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendLocation(_Media):
    endpoint: ClassVar[str] = "sendLocation"
    latitude: float
    longitude: float

    def payload(self) -> dict[str, Any]:
        return fields(
            ("chat_id", self.chat_id),
            ("latitude", self.latitude),
            ("longitude", self.longitude),
            ("disable_notification", self.disable_notification),
            reply_to_message_id=self.reply_to,
            reply_markup=self.reply_markup,
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendVenue(_Media):
    endpoint: ClassVar[str] = "sendVenue"
    latitude: float
    longitude: float
    title: str
    address: str
    foursquare_id: Optional[str] = None

    def payload(self) -> dict[str, Any]:
        return fields(
            ("chat_id", self.chat_id),
            ("latitude", self.latitude),
            ("longitude", self.longitude),
            ("title", self.title),
            ("address", self.address),
            ("disable_notification", self.disable_notification),
            foursquare_id=self.foursquare_id,
            reply_to_message_id=self.reply_to,
            reply_markup=self.reply_markup,
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class SendContact(_Media):
    endpoint: ClassVar[str] = "sendContact"
    phone_number: str
    first_name: str
    last_name: Optional[str] = None

    def payload(self) -> dict[str, Any]:
        return fields(
            ("chat_id", self.chat_id),
            ("phone_number", self.phone_number),
            ("first_name", self.first_name),
            ("disable_notification", self.disable_notification),
            last_name=self.last_name,
            reply_to_message_id=self.reply_to,
            reply_markup=self.reply_markup,
        )


# ── Users and files ──────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class GetUserProfilePhotos(ApiAction):
    endpoint: ClassVar[str] = "getUserProfilePhotos"
    user_id: int
    offset: Optional[int] = None
    limit: Optional[int] = None
    and_then: Continuation

    def payload(self) -> dict[str, Any]:
        return fields(("user_id", self.user_id), offset=self.offset, limit=self.limit)

    def read(self, raw: Any) -> Result[UserProfilePhotos]:
        return Success(decode(UserProfilePhotos, raw))


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class GetFile(ApiAction):
    """Resolve a file id into a downloadable :class:`File`."""

    endpoint: ClassVar[str] = "getFile"
    file_id: str
    and_then: Continuation

    def payload(self) -> dict[str, Any]:
        return fields(("file_id", self.file_id))

    def read(self, raw: Any) -> Result[File]:
        return Success(decode(File, raw))


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class GetFilePath(GetFile):
    """Like :class:`GetFile` but hands only the server-side ``file_path`` on."""

    def read(self, raw: Any) -> Result[str]:
        file = decode(File, raw)
        if file.file_path is None:
            return Failure(f"file '{file.file_id}' has no download path")
        return Success(file.file_path)


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class DownloadFile(ApiAction):
    """Download the bytes of a :class:`File` resolved by :class:`GetFile`."""

    file: File
    and_then: Continuation

    async def perform(self, client: ActiongramClient) -> Result[Any]:
        if self.file.file_path is None:
            return Failure(f"file '{self.file.file_id}' has no download path")
        return await client.download(self.file.file_path)


# ── Chat administration ──────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class KickChatMember(ApiAction):
    endpoint: ClassVar[str] = "kickChatMember"
    chat_id: ChatId
    user_id: int

    def payload(self) -> dict[str, Any]:
        return fields(("chat_id", self.chat_id), ("user_id", self.user_id))


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class UnbanChatMember(ApiAction):
    endpoint: ClassVar[str] = "unbanChatMember"
    chat_id: ChatId
    user_id: int

    def payload(self) -> dict[str, Any]:
        return fields(("chat_id", self.chat_id), ("user_id", self.user_id))


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class GetChatAdministrators(ApiAction):
    """List the administrators of a chat as :class:`ChatMember` records."""

    endpoint: ClassVar[str] = "getChatAdministrators"
    chat_id: ChatId
    and_then: Continuation

    def payload(self) -> dict[str, Any]:
        return fields(("chat_id", self.chat_id))

    def read(self, raw: Any) -> Result[list[ChatMember]]:
        return Success(decode_list(ChatMember, raw))


# ── Queries ──────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AnswerCallbackQuery(ApiAction):
    endpoint: ClassVar[str] = "answerCallbackQuery"
    callback_query_id: str
    text: Optional[str] = None
    show_alert: bool = False

    def payload(self) -> dict[str, Any]:
        return fields(
            ("callback_query_id", self.callback_query_id),
            ("show_alert", self.show_alert),
            text=self.text,
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AnswerInlineQuery(ApiAction):
    endpoint: ClassVar[str] = "answerInlineQuery"
    inline_query_id: str
    results: Sequence[InlineQueryResult]
    cache_time: Optional[int] = None
    is_personal: Optional[bool] = None
    next_offset: Optional[str] = None

    def payload(self) -> dict[str, Any]:
        return fields(
            ("inline_query_id", self.inline_query_id),
            ("results", list(self.results)),
            cache_time=self.cache_time,
            is_personal=self.is_personal,
            next_offset=self.next_offset,
        )


# ── Edits ────────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class EditMessageText(ApiAction):
    endpoint: ClassVar[str] = "editMessageText"
    target: MessageTarget
    text: str
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: bool = False
    reply_markup: Optional[ReplyMarkup] = None

    def payload(self) -> dict[str, Any]:
        return fields(
            *self.target.fields().items(),
            ("text", self.text),
            ("disable_web_page_preview", self.disable_web_page_preview),
            parse_mode=self.parse_mode,
            reply_markup=self.reply_markup,
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class EditMessageCaption(ApiAction):
    endpoint: ClassVar[str] = "editMessageCaption"
    target: MessageTarget
    caption: str
    reply_markup: Optional[ReplyMarkup] = None

    def payload(self) -> dict[str, Any]:
        return fields(
            *self.target.fields().items(),
            ("caption", self.caption),
            reply_markup=self.reply_markup,
        )


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class EditMessageReplyMarkup(ApiAction):
    endpoint: ClassVar[str] = "editMessageReplyMarkup"
    target: MessageTarget
    reply_markup: Optional[ReplyMarkup] = None

    def payload(self) -> dict[str, Any]:
        return fields(*self.target.fields().items(), reply_markup=self.reply_markup)


# ── Update retrieval ─────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class GetUpdates(SessionAction):
    """Fetch every pending update without moving the offset."""


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class PeekUpdate(SessionAction):
    """Fetch the oldest pending update without consuming it."""


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class PopUpdate(SessionAction):
    """Consume the next update through the session's polling logic."""

    run_cmds: bool = True


# ── Combinators ──────────────────────────────────────────────────────────────


def chain(*actions: Action) -> Action:
    """Sequence *actions* left to right; ``chain()`` is :class:`Nothing`."""
    if not actions:
        return Nothing()
    result = actions[-1]
    for action in reversed(actions[:-1]):
        result = Chain(action, result)
    return result


def then(action: Action, continuation: Continuation) -> Action:
    """Return a copy of the result-producing *action* with *continuation* attached."""
    if not any(f.name == "and_then" for f in dataclasses.fields(action)):
        raise TypeError(f"{type(action).__name__} does not produce a result")
    return dataclasses.replace(action, and_then=continuation)


def send_message(chat_id: ChatId, text: str, *args: Any, **options: Any) -> SendMessage:
    """Build a :class:`SendMessage`, %-formatting *text* with *args* when given."""
    if args:
        text = text % args
    return SendMessage(chat_id=chat_id, text=text, **options)


def ignore(_result: Result[Any]) -> Action:
    """Continuation that discards the outcome."""
    return Nothing()
