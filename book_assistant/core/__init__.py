"""Domain core: exceptions, block protocol and the assistant agent."""
