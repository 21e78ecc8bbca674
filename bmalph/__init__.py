"""bmalph: turns BMAD planning artifacts into Ralph loop inputs."""

__version__ = "0.1.0"
