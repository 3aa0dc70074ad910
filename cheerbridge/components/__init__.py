"""twitchio components loaded by the chat bot."""
