"""Ocean Notes: a local notes store with tags, pins, archive and trash."""
