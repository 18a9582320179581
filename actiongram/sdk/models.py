"""Pydantic data models for the Telegram Bot API records actiongram consumes and produces.

Incoming records (``User``, ``Message``, ``Update`` …) are decoded from the
server's JSON; outgoing records (keyboards, inline-query results, input
message content) are encoded into request bodies.  Field names match the
wire format exactly, with ``from`` exposed as ``from_field``.

Scalar fields are strict: a string where an integer is expected is a schema
violation, not something to coerce.  Use :func:`actiongram.sdk.codec.decode`
to turn those violations into :class:`~actiongram.sdk.exceptions.SchemaError`.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, model_validator


class _Record(BaseModel):
    """Common configuration shared by every wire record."""

    model_config = ConfigDict(populate_by_name=True)


# ── Enumerations ─────────────────────────────────────────────────────────────


class ParseMode(str, Enum):
    """Markup language used to format outgoing text."""

    MARKDOWN = "Markdown"
    MARKDOWN_V2 = "MarkdownV2"
    HTML = "HTML"


class ChatAction(str, Enum):
    """Status shown to the user while the bot prepares a reply."""

    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"
    RECORD_VIDEO = "record_video"
    UPLOAD_VIDEO = "upload_video"
    RECORD_AUDIO = "record_audio"
    UPLOAD_AUDIO = "upload_audio"
    UPLOAD_DOCUMENT = "upload_document"
    FIND_LOCATION = "find_location"


class ChatType(str, Enum):
    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"


class UpdateKind(str, Enum):
    """Which payload an :class:`Update` carries."""

    MESSAGE = "message"
    EDITED_MESSAGE = "edited_message"
    INLINE_QUERY = "inline_query"
    CHOSEN_INLINE_RESULT = "chosen_inline_result"
    CALLBACK_QUERY = "callback_query"


# ── Users and chats ──────────────────────────────────────────────────────────


class User(_Record):
    """A Telegram user or bot."""

    id: StrictInt
    first_name: StrictStr
    is_bot: Optional[StrictBool] = None
    last_name: Optional[StrictStr] = None
    username: Optional[StrictStr] = None
    language_code: Optional[StrictStr] = None


class Chat(_Record):
    """A private conversation, group, supergroup or channel."""

    id: StrictInt
    type: ChatType
    title: Optional[StrictStr] = None
    username: Optional[StrictStr] = None
    first_name: Optional[StrictStr] = None
    last_name: Optional[StrictStr] = None


class ChatMember(_Record):
    """A member of a chat together with their status (``creator``, ``administrator`` …)."""

    user: User
    status: StrictStr


# ── Message content ──────────────────────────────────────────────────────────


class MessageEntity(_Record):
    """One special entity in a text message (hashtag, command, link …)."""

    type: StrictStr
    offset: StrictInt
    length: StrictInt
    url: Optional[StrictStr] = None
    user: Optional[User] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "MessageEntity":
        if self.type == "text_link" and self.url is None:
            raise ValueError("entity of type 'text_link' is missing its url")
        if self.type == "text_mention" and self.user is None:
            raise ValueError("entity of type 'text_mention' is missing its user")
        return self


class PhotoSize(_Record):
    """One size of a photo, or a file/sticker thumbnail."""

    file_id: StrictStr
    width: StrictInt
    height: StrictInt
    file_size: Optional[StrictInt] = None


class Audio(_Record):
    file_id: StrictStr
    duration: StrictInt
    performer: Optional[StrictStr] = None
    title: Optional[StrictStr] = None
    mime_type: Optional[StrictStr] = None
    file_size: Optional[StrictInt] = None


class Document(_Record):
    file_id: StrictStr
    thumb: Optional[PhotoSize] = None
    file_name: Optional[StrictStr] = None
    mime_type: Optional[StrictStr] = None
    file_size: Optional[StrictInt] = None


class Sticker(_Record):
    file_id: StrictStr
    width: StrictInt
    height: StrictInt
    thumb: Optional[PhotoSize] = None
    emoji: Optional[StrictStr] = None
    file_size: Optional[StrictInt] = None


class Video(_Record):
    file_id: StrictStr
    width: StrictInt
    height: StrictInt
    duration: StrictInt
    thumb: Optional[PhotoSize] = None
    mime_type: Optional[StrictStr] = None
    file_size: Optional[StrictInt] = None


class Voice(_Record):
    file_id: StrictStr
    duration: StrictInt
    mime_type: Optional[StrictStr] = None
    file_size: Optional[StrictInt] = None


class Contact(_Record):
    phone_number: StrictStr
    first_name: StrictStr
    last_name: Optional[StrictStr] = None
    user_id: Optional[StrictInt] = None


class Location(_Record):
    longitude: StrictFloat
    latitude: StrictFloat


class Venue(_Record):
    location: Location
    title: StrictStr
    address: StrictStr
    foursquare_id: Optional[StrictStr] = None


class UserProfilePhotos(_Record):
    """A user's profile pictures, each in several sizes."""

    total_count: StrictInt
    photos: List[List[PhotoSize]]


class File(_Record):
    """A file ready to be downloaded from ``<file base url>/<file_path>``."""

    file_id: StrictStr
    file_size: Optional[StrictInt] = None
    file_path: Optional[StrictStr] = None


# ── Keyboards (outgoing) ─────────────────────────────────────────────────────


class KeyboardButton(_Record):
    text: StrictStr
    request_contact: Optional[StrictBool] = None
    request_location: Optional[StrictBool] = None


class InlineKeyboardButton(_Record):
    text: StrictStr
    url: Optional[StrictStr] = None
    callback_data: Optional[StrictStr] = None
    switch_inline_query: Optional[StrictStr] = None


class ReplyKeyboardMarkup(_Record):
    """A custom keyboard with reply options."""

    keyboard: List[List[KeyboardButton]]
    resize_keyboard: Optional[StrictBool] = None
    one_time_keyboard: Optional[StrictBool] = None
    selective: Optional[StrictBool] = None


class InlineKeyboardMarkup(_Record):
    """An inline keyboard attached to the message it belongs to."""

    inline_keyboard: List[List[InlineKeyboardButton]]


class ReplyKeyboardRemove(_Record):
    """Ask clients to hide the current custom keyboard."""

    remove_keyboard: Literal[True] = True
    selective: Optional[StrictBool] = None


class ForceReply(_Record):
    """Ask clients to display a reply interface to the user."""

    force_reply: Literal[True] = True
    selective: Optional[StrictBool] = None


ReplyMarkup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove, ForceReply]


# ── Messages ─────────────────────────────────────────────────────────────────


class Message(_Record):
    """A message, including the service messages that announce chat-membership events."""

    message_id: StrictInt
    date: StrictInt
    chat: Chat
    from_field: Optional[User] = Field(None, alias="from")
    forward_from: Optional[User] = None
    forward_from_chat: Optional[Chat] = None
    forward_date: Optional[StrictInt] = None
    reply_to_message: Optional[Message] = None
    edit_date: Optional[StrictInt] = None
    text: Optional[StrictStr] = None
    entities: Optional[List[MessageEntity]] = None
    audio: Optional[Audio] = None
    document: Optional[Document] = None
    photo: Optional[List[PhotoSize]] = None
    sticker: Optional[Sticker] = None
    video: Optional[Video] = None
    voice: Optional[Voice] = None
    caption: Optional[StrictStr] = None
    contact: Optional[Contact] = None
    location: Optional[Location] = None
    venue: Optional[Venue] = None
    new_chat_member: Optional[User] = None
    new_chat_members: Optional[List[User]] = None
    left_chat_member: Optional[User] = None
    new_chat_title: Optional[StrictStr] = None
    new_chat_photo: Optional[List[PhotoSize]] = None
    delete_chat_photo: Optional[StrictBool] = None
    group_chat_created: Optional[StrictBool] = None
    supergroup_chat_created: Optional[StrictBool] = None
    channel_chat_created: Optional[StrictBool] = None
    migrate_to_chat_id: Optional[StrictInt] = None
    migrate_from_chat_id: Optional[StrictInt] = None
    pinned_message: Optional[Message] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


# ── Inline mode ──────────────────────────────────────────────────────────────


class InlineQuery(_Record):
    """An incoming inline query (``@bot something`` typed in any chat)."""

    id: StrictStr
    from_field: User = Field(alias="from")
    query: StrictStr
    offset: StrictStr
    location: Optional[Location] = None


class ChosenInlineResult(_Record):
    """An inline result the user picked and sent to their chat partner."""

    result_id: StrictStr
    from_field: User = Field(alias="from")
    query: StrictStr
    location: Optional[Location] = None
    inline_message_id: Optional[StrictStr] = None


class CallbackQuery(_Record):
    """A press of an inline keyboard button carrying ``callback_data``."""

    id: StrictStr
    from_field: User = Field(alias="from")
    chat_instance: Optional[StrictStr] = None
    message: Optional[Message] = None
    inline_message_id: Optional[StrictStr] = None
    data: Optional[StrictStr] = None


class InputTextMessageContent(_Record):
    message_text: StrictStr
    parse_mode: Optional[ParseMode] = None
    disable_web_page_preview: Optional[StrictBool] = None


class InputLocationMessageContent(_Record):
    latitude: StrictFloat
    longitude: StrictFloat


class InputVenueMessageContent(_Record):
    latitude: StrictFloat
    longitude: StrictFloat
    title: StrictStr
    address: StrictStr
    foursquare_id: Optional[StrictStr] = None


class InputContactMessageContent(_Record):
    phone_number: StrictStr
    first_name: StrictStr
    last_name: Optional[StrictStr] = None


InputMessageContent = Union[
    InputTextMessageContent,
    InputVenueMessageContent,
    InputLocationMessageContent,
    InputContactMessageContent,
]


class InlineQueryResultArticle(_Record):
    type: Literal["article"] = "article"
    id: StrictStr
    title: StrictStr
    input_message_content: InputMessageContent
    reply_markup: Optional[InlineKeyboardMarkup] = None
    url: Optional[StrictStr] = None
    hide_url: Optional[StrictBool] = None
    description: Optional[StrictStr] = None
    thumb_url: Optional[StrictStr] = None


class InlineQueryResultPhoto(_Record):
    type: Literal["photo"] = "photo"
    id: StrictStr
    photo_url: StrictStr
    thumb_url: StrictStr
    photo_width: Optional[StrictInt] = None
    photo_height: Optional[StrictInt] = None
    title: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    caption: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultGif(_Record):
    type: Literal["gif"] = "gif"
    id: StrictStr
    gif_url: StrictStr
    thumb_url: StrictStr
    title: Optional[StrictStr] = None
    caption: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultVideo(_Record):
    type: Literal["video"] = "video"
    id: StrictStr
    video_url: StrictStr
    mime_type: StrictStr
    thumb_url: StrictStr
    title: StrictStr
    caption: Optional[StrictStr] = None
    video_duration: Optional[StrictInt] = None
    description: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultAudio(_Record):
    type: Literal["audio"] = "audio"
    id: StrictStr
    audio_url: StrictStr
    title: StrictStr
    performer: Optional[StrictStr] = None
    audio_duration: Optional[StrictInt] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultDocument(_Record):
    type: Literal["document"] = "document"
    id: StrictStr
    title: StrictStr
    document_url: StrictStr
    mime_type: StrictStr
    caption: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultLocation(_Record):
    type: Literal["location"] = "location"
    id: StrictStr
    latitude: StrictFloat
    longitude: StrictFloat
    title: StrictStr
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultVenue(_Record):
    type: Literal["venue"] = "venue"
    id: StrictStr
    latitude: StrictFloat
    longitude: StrictFloat
    title: StrictStr
    address: StrictStr
    foursquare_id: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultContact(_Record):
    type: Literal["contact"] = "contact"
    id: StrictStr
    phone_number: StrictStr
    first_name: StrictStr
    last_name: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultCachedPhoto(_Record):
    type: Literal["photo"] = "photo"
    id: StrictStr
    photo_file_id: StrictStr
    title: Optional[StrictStr] = None
    caption: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultCachedSticker(_Record):
    type: Literal["sticker"] = "sticker"
    id: StrictStr
    sticker_file_id: StrictStr
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


class InlineQueryResultCachedDocument(_Record):
    type: Literal["document"] = "document"
    id: StrictStr
    title: StrictStr
    document_file_id: StrictStr
    caption: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    input_message_content: Optional[InputMessageContent] = None


InlineQueryResult = Union[
    InlineQueryResultArticle,
    InlineQueryResultPhoto,
    InlineQueryResultGif,
    InlineQueryResultVideo,
    InlineQueryResultAudio,
    InlineQueryResultDocument,
    InlineQueryResultLocation,
    InlineQueryResultVenue,
    InlineQueryResultContact,
    InlineQueryResultCachedPhoto,
    InlineQueryResultCachedSticker,
    InlineQueryResultCachedDocument,
]


# ── Updates ──────────────────────────────────────────────────────────────────


class Update(_Record):
    """One incoming event, identified by a server-assigned increasing ``update_id``.

    At most **one** payload field may be populated; a second one is rejected
    on construction and on decoding.  An update with no payload is either a
    bare id (a consumed update reported back by the polling loop) or an event
    kind this library does not model.
    """

    update_id: StrictInt
    message: Optional[Message] = None
    edited_message: Optional[Message] = None
    inline_query: Optional[InlineQuery] = None
    chosen_inline_result: Optional[ChosenInlineResult] = None
    callback_query: Optional[CallbackQuery] = None

    @model_validator(mode="after")
    def _single_payload(self) -> "Update":
        populated = [kind.value for kind in UpdateKind if getattr(self, kind.value) is not None]
        if len(populated) > 1:
            raise ValueError(f"update carries more than one payload: {', '.join(populated)}")
        return self

    @property
    def kind(self) -> Optional[UpdateKind]:
        """The populated payload's kind, or ``None`` for a payload-less update."""
        for kind in UpdateKind:
            if getattr(self, kind.value) is not None:
                return kind
        return None

    @property
    def payload(self) -> Union[Message, InlineQuery, ChosenInlineResult, CallbackQuery, None]:
        kind = self.kind
        return getattr(self, kind.value) if kind is not None else None


for _model in (Message, CallbackQuery, Update):
    _model.model_rebuild()
