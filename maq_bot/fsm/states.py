from enum import Enum


class IntakeStage(str, Enum):
    NONE = "none"                              # not in the funnel, never stored
    AWAITING_APPLIANCE = "awaiting_appliance"  # ask which appliance
    AWAITING_MODEL = "awaiting_model"          # ask brand/model
    AWAITING_PROBLEM = "awaiting_problem"      # ask problem description, then summary
