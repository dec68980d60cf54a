from edura_finance.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from edura_finance.app.models.user import User  # noqa: F401
from edura_finance.app.models.school_class import SchoolClass  # noqa: F401
from edura_finance.app.models.enrollment import Enrollment  # noqa: F401
from edura_finance.app.models.tuition_billing import TuitionBilling  # noqa: F401
from edura_finance.app.models.teacher_rate import TeacherRate  # noqa: F401
from edura_finance.app.models.tutor_payment import TutorPayment  # noqa: F401
from edura_finance.app.models.session_record import SessionRecord  # noqa: F401
from edura_finance.app.models.expense_category import ExpenseCategory  # noqa: F401
from edura_finance.app.models.expense import Expense  # noqa: F401
