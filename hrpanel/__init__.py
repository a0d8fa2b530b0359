"""HR panel: monthly periods, payroll reports and bonus configuration."""
