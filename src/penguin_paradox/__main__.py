from penguin_paradox.cli import main

main()
