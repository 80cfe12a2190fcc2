"""Built-in plugins shipped with kycpay."""
