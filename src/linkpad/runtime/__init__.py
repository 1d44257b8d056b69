"""Runtime services shared by every editor component."""
