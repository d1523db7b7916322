# models/ssh.py

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List


class SSHKey(BaseModel):
    """
    A named SSH key pair registered in the cluster directory. Nodes refer to
    keys by name; the private key file may be passphrase-protected.
    """

    name: str
    private_key_path: str
    public_key_path: Optional[str] = None

    @field_validator("name", "private_key_path")
    @classmethod
    def validate_non_empty(cls, val: str) -> str:
        if not val.strip():
            raise ValueError("must be a non-empty string")
        return val


class SSHConfig(BaseModel):
    """
    SSH configuration for connecting to a remote host, assembled per command.
    private_key holds unencrypted key text and is only ever written to an
    ephemeral file. If host_keys is empty => accept-new against an empty
    known_hosts.
    """

    user: str
    hostname: str
    port: int = Field(default=22, ge=1, le=65535)
    private_key: str
    host_keys: Optional[List[str]] = None

    @field_validator("private_key")
    @classmethod
    def validate_private_key(cls, val: str) -> str:
        if not val.strip():
            raise ValueError("private_key must be a non-empty string")
        return val
