from .server import ServerClient as ServerClient
