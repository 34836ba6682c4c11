"""xcreport: test reports from exported build/test result bundles."""
