def http_400_wrong_credentials_details() -> str:
    return "Wrong credentials"


def http_401_unauthorized_details() -> str:
    return "Invalid authentication credentials"


def http_401_refresh_details() -> str:
    return "Refresh token is invalid or expired"


def http_403_forbidden_details() -> str:
    return "Access denied. Admin role required."


def http_404_id_details(entity: str, id: int | str) -> str:
    return f"{entity} with id `{id}` does not exist!"


def http_409_session_state_details(session_id: str, status: str) -> str:
    return f"Session `{session_id}` is {status} and can no longer change state"
