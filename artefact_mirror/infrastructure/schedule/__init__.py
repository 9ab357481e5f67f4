from artefact_mirror.infrastructure.schedule.cron import MirrorScheduler

__all__ = ["MirrorScheduler"]
