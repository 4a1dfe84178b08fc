def remote_session(request):
    """Expose the signed-in remote user (or None) to templates."""
    session = getattr(request, "remote_session", None)
    return {
        "remote_user": session.user if session is not None else None,
    }
