"""Infrastructure: persistence and browser automation."""
