"""Tool server and runtime configuration for hours-split sessions."""
