"""TaskerAI access service: roles, promotions and the pending-user lifecycle."""
