"""Command-line entry point: python reconcile.py BANK.csv BUDGET.csv [--filters filters.json]"""

from budget_verifier.reconcile import main

if __name__ == '__main__':
    main()
