"""EPG Sync: provider adapters that normalize TV listings into one program model."""
