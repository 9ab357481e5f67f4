from artefact_mirror.infrastructure.oci.di import OciProvider

__all__ = ["OciProvider"]
