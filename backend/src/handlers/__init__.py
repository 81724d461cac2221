"""Lambda handlers for the Chamonix ski conditions API."""
