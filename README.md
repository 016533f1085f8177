# redditkit

A small, synchronous client for the Reddit API, built on `requests`.
Each area of the API has its own service class, and every service sends its
requests through a shared `redditkit.client.Client`.

## Installation

```
pip install redditkit
```

To run the test suite, install the test extra and run pytest:

```
pip install "redditkit[test]"
pytest
```

## Getting started

`Client` takes keyword arguments only: `base_url` (default
`https://oauth.reddit.com`), `user_agent`, `token`, `username`, `session` (a
`requests.Session`) and `timeout` in seconds. When a token is given it is
sent as a bearer token. `username` is used by the flair calls that act on
yourself (`FlairService.choices` and `FlairService.select`). The client can
be used as a context manager, which closes its session on exit.

```python
from redditkit.client import Client
from redditkit.gold import GoldService
from redditkit.live_thread import LiveThreadService

with Client(token="token", username="someone", user_agent="my-app/1.0") as client:
    live = LiveThreadService(client)
    thread, response = live.get("15nevtv8e54dh")
    print(thread.title, thread.viewer_count, response.status_code)

    GoldService(client).give("someone_else", 3)
```

Calls that read data return the parsed objects followed by a
`redditkit.client.Response`; calls that only act return the `Response`
alone. A `Response` offers `status_code`, `headers`, `json()`, the parsed
`rate` limit state (`Rate` with `remaining`, `used` and `reset`) and, for
listings, `after`.

## What is covered

| Module                  | Service              | What it does                                                   |
|-------------------------|----------------------|----------------------------------------------------------------|
| `redditkit.account`     | `AccountService`     | karma, settings, friends, blocked and trusted users            |
| `redditkit.collection`  | `CollectionService`  | get, create, edit, reorder and follow post collections         |
| `redditkit.flair`       | `FlairService`       | user and post flair, templates, choices, bulk changes          |
| `redditkit.emoji`       | `EmojiService`       | list, upload, update and delete subreddit emojis               |
| `redditkit.gold`        | `GoldService`        | gild posts and comments, give gold to users                    |
| `redditkit.live_thread` | `LiveThreadService`  | live threads, their updates, contributors and permissions      |

Requests that take several optional settings are plain dataclasses:
`CollectionCreateRequest`, `FlairConfigureRequest`,
`FlairTemplateCreateOrUpdateRequest`, `FlairSelectRequest`,
`FlairChangeRequest`, `LiveThreadCreateOrUpdateRequest` and
`EmojiCreateOrUpdateRequest`. Fields left unset (None or empty) are not sent.
`Settings` in `redditkit.account` works the same way for
`AccountService.update_settings`.

Results come back as dataclasses too: `Collection`, `Flair`, `FlairSummary`,
`FlairChoice`, `FlairTemplate`, `FlairChangeResponse`, `Emoji`,
`LiveThread`, `LiveThreadUpdate`, `LiveThreadContributors`, `Settings`,
`SubredditKarma` and `Relationship`.

## Watching requests

`Client.on_request_completed` registers a callback that is called with the
prepared request and the `requests.Response` after every request made
through `Client.request`, which is handy for logging:

```python
def log(request, response):
    print(request.method, request.url, response.status_code)

client.on_request_completed(log)
```

## Live thread permissions

Contributor permissions are described with `LiveThreadPermissions` and
rendered in the form the API expects by `format_permissions`:

```python
from redditkit.live_thread import LiveThreadPermissions, format_permissions

format_permissions(None)
# '+all'

format_permissions(LiveThreadPermissions(close=True, manage=True, update=True))
# '-all,+close,-discussions,-edit,+manage,-settings,+update'
```

## Errors

Invalid arguments raise `ValueError` before anything is sent: a missing
request object, an emoji request without a name, gold for a number of months
outside 1 to 36, fewer than 1 or more than 100 flair changes at once, an
empty list of live thread ids, or an unknown live thread report reason.

Failures reported by the API raise exceptions from `redditkit.errors`:

- `ErrorResponse`: a non-2xx HTTP response other than 429.
- `RateLimitError`: a 429 response. Its `rate` tells you when the limit
  resets, and `reset_message(now)` describes that in words.
- `JSONErrorResponse`: a 2xx response whose JSON body lists errors under
  `json.errors`; each is an `APIError` with a `label`, a `reason` and a
  `field`.

```python
from datetime import datetime, timezone

from redditkit.errors import ErrorResponse, RateLimitError

try:
    gold.give("someone", 3)
except RateLimitError as exc:
    print(exc.reset_message(datetime.now(timezone.utc)))
except ErrorResponse as exc:
    print(exc)
```

## What this package does not do

- It does not obtain access tokens: pass a token you already have to
  `Client`.
- It has no private messaging or inbox support.
- It does not fetch general listings of posts, comments or subreddits, and
  has no streaming of new content; the only listings it reads are those of
  live threads and their updates.
- It is a library only and installs no command.