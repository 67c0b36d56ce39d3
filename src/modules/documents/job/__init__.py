from .auto_delete import run_cleanup, start_deletion_job

__all__ = ['run_cleanup', 'start_deletion_job']
