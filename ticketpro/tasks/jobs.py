from ticketpro.tasks.celery_app import celery
from ticketpro.tasks import worker_jobs

@celery.task(name="ticketpro.tasks.jobs.expire_holds")
def expire_holds():
    return worker_jobs.expire_holds()

@celery.task(name="ticketpro.tasks.jobs.reconcile_group_tickets")
def reconcile_group_tickets():
    return worker_jobs.reconcile_group_tickets()
