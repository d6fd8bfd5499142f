from safesftp.cli import main

main()
