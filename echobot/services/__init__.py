"""Services used by the echobot webhook and the generate program."""
