"""JSON API blueprints; each subpackage exposes ``bp``."""
