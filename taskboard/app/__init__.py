"""UI-facing dashboard facade and state objects.

- Single command entry: backend.dispatch(cmd, payload)
- UI binding via the state QObject (backend.state)
- Python→UI notifications via backend.event
"""
