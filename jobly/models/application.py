from sqlalchemy import Column, ForeignKey, Integer, String
from jobly.core.database import Base


class Application(Base):
    """
    A user's application to a job.

    The composite primary key is what rejects a second application for the
    same (username, job_id) pair. Rows go away with their user or job.
    """
    __tablename__ = "applications"

    username = Column(
        String(25),
        ForeignKey("users.username", ondelete="CASCADE"),
        primary_key=True,
    )
    job_id = Column(
        Integer,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        primary_key=True,
    )

    def __repr__(self):
        return f"<Application(username='{self.username}', job_id={self.job_id})>"
