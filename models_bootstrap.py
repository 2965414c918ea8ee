# models_bootstrap.py
from employee import models as _employee_models
from staffing import models as _staffing_models
from staffrequest import models as _staffrequest_models
from schedule import models as _schedule_models
