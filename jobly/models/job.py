from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Text
from jobly.core.database import Base


class Job(Base):
    """
    Job posting offered by a company.

    Equity is an exact NUMERIC fraction in [0, 1]; the CRUD layer returns it
    as a decimal string so no float rounding reaches API consumers.
    """
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_jobs_salary_non_negative"),
        CheckConstraint("equity <= 1.0", name="ck_jobs_equity_at_most_one"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, nullable=True)
    equity = Column(Numeric, nullable=True)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
