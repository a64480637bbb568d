"""Extensions: protocol servers built on the core tools."""
