from fediring.adapters.mastodon.client import MastodonClient, MentionNotification
from fediring.adapters.mastodon.runner import MastodonRunner

__all__ = ["MastodonClient", "MentionNotification", "MastodonRunner"]
