"""Health monitoring for the services an application depends on."""
