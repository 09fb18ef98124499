"""Submission key pair model."""

from __future__ import annotations

from pyexposure.models._base import ExposureBaseModel


class SubmissionKeySet(ExposureBaseModel):
    """Key pair obtained by claiming a one-time code.

    Parameters
    ----------
    server_public_key : str
        Base64 X25519 public key of the submission server.
    client_private_key : str
        Base64 X25519 private key generated on this device.
    client_public_key : str
        Base64 X25519 public key registered with the server.
    """

    server_public_key: str
    client_private_key: str
    client_public_key: str
