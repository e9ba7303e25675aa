"""Operations used by the dashboard backend."""
