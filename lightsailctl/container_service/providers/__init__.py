from .docker_engine import DockerEngine
from .lightsail import Lightsail

__all__ = ["DockerEngine", "Lightsail"]
