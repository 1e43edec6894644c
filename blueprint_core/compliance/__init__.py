"""BR18/BR23 compliance rules for wizard answers and plans."""
