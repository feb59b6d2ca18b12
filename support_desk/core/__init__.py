"""Domain core: exceptions, queue arithmetic and the real-time event hub."""
