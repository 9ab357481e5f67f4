from artefact_mirror.domain.matrix.service.matrix import expand, matrix_payload

__all__ = ["expand", "matrix_payload"]
