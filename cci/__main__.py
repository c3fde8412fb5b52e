from cci.cli.app import main

main()
