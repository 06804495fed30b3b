# redditwrap

A small, synchronous client for the Reddit API built on `requests`.
It covers account settings and relationships, collections, flair,
emoji, gold, live threads and private messages.

## Installation

```
pip install redditwrap
```

To run the test suite:

```
pip install "redditwrap[test]"
pytest
```

## Usage

Every service is built on a `redditwrap.transport.Transport`. The transport holds
the base URL (by default `https://oauth.reddit.com/`), the `requests` session, the
user agent, and the name of the user the client acts as. That name is used by
`FlairService.choices` and `FlairService.select`.

```python
import requests

from redditwrap.transport import Transport
from redditwrap.account import AccountService
from redditwrap.collection import CollectionService, CollectionCreateRequest
from redditwrap.gold import GoldService
from redditwrap.live_thread import LiveThreadService, LiveThreadPermissions
from redditwrap.message import MessageService, SendMessageRequest

session = requests.Session()
session.headers["Authorization"] = "Bearer token"

transport = Transport(
    "https://oauth.reddit.com",
    "my_username",
    session,
    "script:redditwrap-example:0.1.0",
)

account = AccountService(transport)
settings = account.settings()
print(settings.language, settings.number_of_posts)

collections = CollectionService(transport)
collection = collections.create(
    CollectionCreateRequest(title="Highlights", subreddit_id="t5_example", layout="TIMELINE")
)
collections.add_post("t3_example", collection.id)

messages = MessageService(transport)
messages.send(SendMessageRequest(to="someone", subject="hello", text="hi there"))
comments, private_messages = messages.inbox()

live = LiveThreadService(transport)
live.invite("thread_id", "someone", LiveThreadPermissions(update=True))

response = GoldService(transport).give("someone", 1)
print(response.status_code)
```

Calls that fetch data return the parsed result directly: a dataclass, a list of
dataclasses, or a tuple of them. Calls that only perform an action return a
`redditwrap.transport.Response`. It exposes `status_code`, `headers` and `rate`,
which is the rate limit read from the `X-Ratelimit-*` headers.

### Services

- `account.AccountService`: `settings`, `update_settings`, `friends`, `blocked`,
  `messaging` (blocked and trusted users), `trusted`, `add_trusted`, `remove_trusted`.
  `Settings` holds every preference as an optional value. `Settings.to_json` leaves
  out the ones that are `None`.
- `collection.CollectionService`: get, list per subreddit, create, delete, add,
  remove and reorder posts, update title, description and layout, follow and unfollow.
- `flair.FlairService`: list user and post flairs, configure, enable or disable,
  create or update templates, delete and reorder templates, list choices, select or
  assign flair, and `change` for batches of 1 to 100 users, sent as CSV.
- `emoji.EmojiService`: `get` returns the default emojis and the subreddit's own.
  The service can also `delete` emojis, `set_size` and `disable_custom_size`, and
  `update` an emoji's permissions. `upload` obtains an upload lease, posts the image
  file as a multipart form to the leased URL, and then registers the emoji.
- `gold.GoldService`: `gild` a post or comment, `give` 1 to 36 months of gold.
- `live_thread.LiveThreadService`: the currently featured thread (`now` returns
  `None` on a 204 reply), get one or several threads, post, list, strike and delete
  updates, create, close and configure threads, and manage contributors and
  invitations. `LiveThreadService` can also hide discussions and report a thread.
  `permissions_string(None)` is `"+all"`.
- `message.MessageService`: mark read or unread, block, collapse, delete, send,
  and list the inbox, unread items and sent messages.

## Errors

Invalid arguments raise `ValueError` before any request is sent. Examples are a
missing request object, an empty emoji name, no ids where at least one is needed,
gold months outside 1–36, or an unknown live thread report reason. Failed API
calls raise the exceptions in `redditwrap.errors`, through `check_response`:

- `ErrorResponse` for non-2xx replies other than 429.
- `JSONErrorResponse` for replies that list errors in their JSON body, even with
  a 2xx status. Each entry is an `APIError` with `label`, `reason` and `field`.
- `RateLimitError` for a 429 reply. Its `rate` tells you when the limit resets.

```python
from redditwrap.errors import RateLimitError

try:
    account.friends()
except RateLimitError as exc:
    print(exc.format_rate_reset())
```

## What it does not do

- It does not obtain OAuth tokens. Put your own credentials on the `requests`
  session you hand to `Transport`.
- It has no single client object that bundles the services. Each service is
  built from a transport.
- It has no calls for posts, comments, subreddits, users, listings or streaming.
  The account service does not fetch account info, karma or trophies.
- It provides no command-line program.