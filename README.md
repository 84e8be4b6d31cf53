# cozeapi

A Python client for the Coze HTTP API. It covers bots, chats (blocking,
polling and streaming), chat messages, conversations, and the audio
endpoints: rooms, speech synthesis, transcription and voice cloning.

## Installation

```
pip install cozeapi
```

The only runtime dependency is `httpx`.

## Getting started

```python
from cozeapi.auth import TokenAuth
from cozeapi.client import CozeAPI

with CozeAPI(TokenAuth("token")) as api:
    bot = api.bots.retrieve("bot_id")
    print(bot.name, bot.version)
```

`CozeAPI` takes these keyword options:

- `base_url`: defaults to `cozeapi.models.COM_BASE_URL`. Pass
  `cozeapi.models.CN_BASE_URL` to use the mainland China endpoint instead.
- `http_client`: an `httpx.Client` to send requests with. If you leave it
  out, the client creates its own and closes it in `close()`.
- `timeout`: the timeout in seconds for the client it creates. The default
  is 5.
- `log_level` and `log_handler`: the level of the `cozeapi` logger and a
  handler to attach to it.

The resources are available as `api.audio`, `api.bots`, `api.chat` and
`api.conversations`.

## Authentication

Every request carries a bearer token. `cozeapi.auth.TokenAuth` wraps a
fixed access token. Any subclass of `cozeapi.auth.Auth` that implements
`token()` and returns a string works in its place. The token is fetched
again for every request.

`cozeapi.auth.get_refresh_before(ttl)` returns how many seconds before
expiry a token with the given lifetime should be renewed. Use it when you
write a refreshing `Auth`.

## Building messages

`cozeapi.models` provides helpers for the messages you send:

```python
from cozeapi.models import (
    build_user_question_text,
    build_user_question_objects,
    build_assistant_answer,
    new_text_message_object,
    new_image_message_object_by_url,
)

question = build_user_question_text("What is in this picture?", None)
multimodal = build_user_question_objects(
    [
        new_text_message_object("Describe this image"),
        new_image_message_object_by_url("https://example.com/cat.png"),
    ],
    None,
)
answer = build_assistant_answer("It is a cat.", None)
```

`build_user_question_objects` encodes its parts as a JSON string and sets
the content type to `object_string`. There are also helpers that build file,
image and audio parts from a file id or a URL.

## Chatting

`api.chat` is a `cozeapi.chats.Chats`:

- `create(bot_id, user_id, ...)` starts a chat and returns a `Chat` at once.
- `create_and_poll(..., timeout=...)` starts a chat and polls it once a
  second until its status is `completed`. It then returns a `ChatPoll` that
  holds the chat and its messages. If the timeout in seconds runs out first,
  the chat is cancelled and the cancelled chat is returned with its messages.
- `stream(...)` returns a `ChatStream`. Iterating over it yields `ChatEvent`
  objects as the server sends them. It is also a context manager, and
  `close()` releases the connection.
- `cancel`, `retrieve`, `submit_tool_outputs` and
  `stream_submit_tool_outputs` cover the rest of the chat life cycle.
- `api.chat.messages.list(conversation_id, chat_id)` lists the messages of a
  chat.

```python
from cozeapi.models import build_user_question_text

with api.chat.stream(
    bot_id="bot_id",
    user_id="user_id",
    messages=[build_user_question_text("Hello", None)],
) as events:
    for event in events:
        if event.message is not None:
            print(event.message.content, end="")
```

A streamed chat ends with a `done` event, and `ChatEvent.is_done()` reports
it. An `error` event from the server raises `CozeAPIError`.
`cozeapi.chat_models.iter_chat_events` parses the lines of an event stream
on its own, and `parse_chat_event` parses a single event.

## Conversations, bots and audio

- `api.conversations`: `create`, `retrieve` and `clear`.
- `api.bots`: `create`, `update`, `publish` and `retrieve`.
- `api.audio.rooms.create` creates a real-time audio room.
- `api.audio.speech.create` synthesises speech. Its `write_to_file(path)`
  saves the audio.
- `api.audio.transcriptions.create` uploads audio and returns the text.
- `api.audio.voices.clone` clones a voice from a sample. It raises
  `ValueError` when no file is given.

## Errors

A failed request raises `cozeapi.transport.CozeAPIError`. A request fails
when the HTTP status is not 2xx or when the response body has a non-zero
`code`. The exception carries `code`, `msg`, `log_id` and `status_code`.
Every response object records the server's log id, which you can read with
`log_id()`. Quote that id when you report a problem to the service.

## What this package does not do

- It has no paged listing. There is no listing of bots in a space, of voices
  or of conversations.
- It has no OAuth or JWT token exchange. Only fixed tokens and your own
  `Auth` subclasses are supported.
- It does not cover workflows, workspaces, datasets, files, templates or
  users.
- It is synchronous only. There is no async client.

## Running the tests

```
pip install -e ".[test]"
pytest
```