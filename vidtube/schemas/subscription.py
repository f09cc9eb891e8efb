from datetime import datetime

from vidtube.schemas.common import CamelModel, ChannelSummary


class SubscriptionStatus(CamelModel):
    is_subscribed: bool


class SubscribedUser(CamelModel):
    user: ChannelSummary
    subscribed_at: datetime
