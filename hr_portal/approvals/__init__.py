"""Two-stage approval workflows (team lead, then manager)."""
