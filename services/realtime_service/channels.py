from shared.security.roles import Actor, Role

RIDERS_ONLINE = "RIDERS_ONLINE"


def user_channel(user_id: str) -> str:
    return f"USER:{user_id}"


def restaurant_channel(restaurant_id: str) -> str:
    return f"RESTAURANT:{restaurant_id}"


def channels_for(actor: Actor, restaurant_id: str | None = None) -> list[str]:
    """Channels a freshly authenticated connection joins."""
    channels = [user_channel(actor.id)]
    if actor.role == Role.RIDER:
        channels.append(RIDERS_ONLINE)
    elif actor.role == Role.RESTAURANT and restaurant_id:
        channels.append(restaurant_channel(restaurant_id))
    return channels
